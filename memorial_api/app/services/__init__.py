"""
Service layer.

Each service encapsulates the business logic for one domain and
receives its settings and stores through its constructor, so the
routes never touch a store directly.
"""
