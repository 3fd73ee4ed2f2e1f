"""Remote playlist page sources.

This module talks to the Spotify Web API and returns typed pages.
It also owns token resolution and retry behavior for remote calls.
"""
