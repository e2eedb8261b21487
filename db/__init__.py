"""
db/ - Database Layer
====================
Connection pooling, statement execution, column extraction, SQL text
builders and pagination. This layer is the lowest in the architecture
and depends only on `config`, `errors` and `utils`.
"""
