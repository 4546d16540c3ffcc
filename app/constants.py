import os

# Configurações globais de ambiente
APP_PORT = int(os.getenv("APP_PORT", "8080"))
DEBUG_MODE = os.getenv("DEBUG_MODE", "False").lower() == "true"

# Credenciais do bot Telegram (sink de notificações)
TG_API_TOKEN = os.getenv("TG_API_TOKEN")
TG_CHAT_ID = os.getenv("TG_CHAT_ID")
TG_API_BASE_URL = os.getenv("TG_API_BASE_URL", "https://api.telegram.org")
TG_TIMEOUT_SECONDS = float(os.getenv("TG_TIMEOUT_SECONDS", "10"))
# Limite de texto da API sendMessage
TG_MAX_MESSAGE_LENGTH = int(os.getenv("TG_MAX_MESSAGE_LENGTH", "4096"))

# Rotas dinâmicas: lista separada por vírgula, ex. URL_PATH="orders,deploys"
# Para cada rota, <ROTA>_FILTER_KEY define os campos de topo enviados
URL_PATH = os.getenv("URL_PATH", "")
FILTER_KEY_SUFFIX = "_FILTER_KEY"

# Rotas reservadas (sempre registradas, nunca filtradas)
WEBHOOK_PATH = "/webhook"
HEARTCHECK_PATH = "/heartcheck"

# Limite de aninhamento ao achatar o JSON recebido
MAX_FLATTEN_DEPTH = int(os.getenv("MAX_FLATTEN_DEPTH", "64"))

# Se true, falha de entrega ao Telegram responde 502 ao chamador (padrão: fire-and-forget)
SURFACE_DELIVERY_FAILURES = os.getenv("SURFACE_DELIVERY_FAILURES", "false").lower() == "true"

RESPONSE_TEXTS = {
    "dynamic": "Dynamic request processed",
    "webhook": "Webhook request processed",
    "heartcheck": "Heartcheck request processed",
    "bad_method": "Invalid HTTP method",
    "bad_body": "Failed to decode JSON payload",
    "too_deep": "JSON payload nested too deeply",
    "not_found": "404 page not found",
    "delivery_failed": "Failed to deliver message",
}
