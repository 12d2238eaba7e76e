"""Read, show and edit POSIX access control lists of files and directories."""

__version__ = "0.1.0"