"""Object storage adapters"""
