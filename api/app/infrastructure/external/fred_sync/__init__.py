"""
Pipeline de sincronización incremental: FRED API -> PostgreSQL.

Este paquete está diseñado para ejecutarse como job (cron / task scheduler),
no como parte del request/response del API.

Objetivos de diseño:
- Idempotencia: se puede ejecutar N veces sin duplicar datos (UPSERT por (series_id, date)).
- Incremental: cada serie se pide desde max(date) + 1 día.
- Reanudable: el offset dentro del catálogo se persiste después de cada serie.
- Rate limit: una serie por iteración con pausa fija entre series.
"""
