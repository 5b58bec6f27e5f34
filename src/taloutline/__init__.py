"""tal-outline - lexical outline scanner for TAL source documents."""

__version__ = "0.1.0"
