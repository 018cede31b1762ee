"""
Adapter layer for the Files Store.

Contains the storage abstraction and its MongoDB (GridFS + collection) implementation.
"""
