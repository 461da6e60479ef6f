"""
AI module - DeepSeek-backed intervention recommendations and follow-up
guidance with canned fallbacks.
"""
