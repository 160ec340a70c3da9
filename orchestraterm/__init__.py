"""Terminal key bindings, copy-mode selection and colour helpers, and a persistent agent team engine."""

__version__ = "0.2.0"