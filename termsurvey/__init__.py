"""Interactive terminal prompts: a select list, validators and answer transforms."""

__version__ = "0.1.0"