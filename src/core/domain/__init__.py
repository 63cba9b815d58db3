"""Modelos y entidades del dominio.

Por qué:
- Aquí viven las estructuras de Memegen (plantillas, fuentes, payloads) y las
  opciones de salida, validadas con Pydantic v2.
- El dominio no conoce HTTP ni la CLI: solo conceptos del problema.
"""
