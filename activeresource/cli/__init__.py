"""
ActiveResource CLI - query a REST resource from the terminal.

Usage:
    ar fetch https://api.example.com/v1 users --where status=active --limit 5
    ar fetch https://api.example.com/v1 users --id 42
    ar count https://api.example.com/v1 users --pagination-envelope _meta
"""

__version__ = "0.1.0"
__cli_name__ = "ar"
