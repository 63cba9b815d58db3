"""Interfaces/abstracciones del Core.

Por qué:
- `MemeAPI` (Protocol) es lo único que servicios y CLI conocen de la API.
- Los tests sustituyen el cliente HTTP por fakes sin tocar `httpx`.
"""
