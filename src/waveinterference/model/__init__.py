"""
The MODEL layer contains pure data structures and business logic.
It has NO knowledge of the GUI (Qt) or the rendering kernel (numba).
It deals with wave sources, global parameters and the per-frame snapshot.
"""
