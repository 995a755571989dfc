"""
Test suite for toy-ecdh

Contains:
- field and curve arithmetic
- group law, scalar multiplication and discrete log search
- the threaded key exchange and the demo entry point
"""
