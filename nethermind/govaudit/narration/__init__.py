from .narrator import CalldataNarrator, Narration, format_args, format_value
