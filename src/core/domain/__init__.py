"""Valores del harness: peticiones, resultados, credenciales y reservas.

Todos son modelos Pydantic v2 inmutables (salvo `Booking`, que es payload).
No importan httpx ni la CLI.
"""
