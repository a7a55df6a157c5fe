"""
feed_import/api package marker.
"""
