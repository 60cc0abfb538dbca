"""
Photo/video geolocation with bilingual (English/Russian) descriptions and
spoken summaries, backed by a grounded Gemini model.

Building blocks:
- media encoder
- location inference client
- speech synthesis client
- PCM decoder and player
- relay service and client session
"""

__version__ = "0.1.0"
