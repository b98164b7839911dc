"""
Конфигурация маркетплейса: подключение к БД, логирование и бизнес-лимиты.
"""
