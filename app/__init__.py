"""Pacote webapp do proxy de webhooks JSON -> Telegram.

Este pacote contém:
- constants: variáveis de ambiente e textos de resposta
- flattener: conversão recursiva de JSON em texto indentado
- filters: seleção das chaves de topo por rota
- routes: registro imutável de rotas e filtros
- dispatcher: processamento de cada requisição
- services: integração com serviços externos (Telegram)
- controller: criação do Flask app e endpoints
"""
