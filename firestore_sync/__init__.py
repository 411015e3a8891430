"""
Sincronización one-way: Firestore -> base de datos relacional.

Este paquete está diseñado para ejecutarse como job (cron / task scheduler).

Objetivos de diseño:
- Idempotencia: se puede ejecutar N veces sin duplicar filas (upsert por unique key).
- Full re-read: cada corrida vuelve a leer la colección completa.
- Control total: mapeos/transformaciones/defaults definidos en código.
"""

__version__ = "1.0.0"
