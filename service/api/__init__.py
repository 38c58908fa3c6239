# service/api/__init__.py
