"""Scraper package for collecting the video grid of a TikTok profile.

Modules are split by pipeline stage: navigation, pagination, extraction
and writers, with browser lifecycle and configuration alongside.
"""
