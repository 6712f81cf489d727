"""
Adapters: configuration and command-line front ends
"""
