"""
HTTP surface of the admin console.
"""
