"""
Lingual Command-Line Tools
==========================

- lingualc: Lingual compiler front end
"""
