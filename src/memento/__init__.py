"""
Memento - component lifecycle engine for AI coding assistants

Memento installs, updates and composes reusable modes, workflows and agents
inside a project-local ``.memento`` directory, tracking versions and local
edits against a template source.
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
