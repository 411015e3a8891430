"""
Pipeline de sincronización one-way: Firestore (REST) -> base de datos relacional.

Piezas puras (sin I/O): value_decoder, field_mapper, transformations.
Piezas con I/O: auth (token OAuth2), firestore_client (fetch), repository (upsert).
Orquestación: sync_service.
"""
