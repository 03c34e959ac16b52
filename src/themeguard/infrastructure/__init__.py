"""Infrastructure layer — style compilers and import resolution.

Everything that touches the filesystem or spawns a process lives here.
"""
