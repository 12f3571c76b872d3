"""
Sora SDK services.

- video_generation: Job submission, polling and download
- prompt_enhancement: Chat-completion based prompt suggestions
"""
