"""mern-stacker: scaffold React + Vite + Express projects from layered templates."""

__version__ = "0.1.0"
