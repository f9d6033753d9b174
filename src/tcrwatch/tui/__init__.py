"""
Interactive terminal UI pieces for tcrwatch.
"""

from .commit_prompt import CommitMessageApp, prompt_commit_message

__all__ = ["CommitMessageApp", "prompt_commit_message"]
