"""
Infrastructure layer: persistence repositories and receipt storage.
"""
