"""App: pipeline de requisições outbound das plataformas de mensageria.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- infra/: implementações concretas de IO (http, cache)
- protocols/: contratos/interfaces
- observability/: correlação e métricas das requisições
- constants/: plataformas e métodos HTTP suportados

Padrão: app executa; config configura; utils apoia.
"""
