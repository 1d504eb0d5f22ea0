"""Domain layer: business rules independent of frameworks and storage"""
