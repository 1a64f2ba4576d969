APP_NAME = "confseek"
ENV_PREFIX = "CONFSEEK_"
