"""
Command-line front end
"""
