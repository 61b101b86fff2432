"""
app/schemas package marker.
"""
