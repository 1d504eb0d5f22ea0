"""Document HTTP API (v1)"""
