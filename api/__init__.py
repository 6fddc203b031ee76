"""
FastAPI RESTful API for the Bookshelf record keeper.

This module provides a REST API for:
- Adding, updating and deleting books on the shelf
- Listing books filtered by name, reading and finished state
- Fetching a single book by id
"""
