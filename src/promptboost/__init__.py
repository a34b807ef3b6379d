"""promptboost - rewrite prompts into clearer prompts with a chosen AI model."""

__version__ = "0.1.0"
