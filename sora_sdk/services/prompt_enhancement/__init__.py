from .enhancer import PromptEnhancer, parse_suggestions

__all__ = ["PromptEnhancer", "parse_suggestions"]
