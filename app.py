# app.py
"""
Entrypoint da aplicação.

Uso:
  python app.py perfis
  python app.py sincronizar --perfil almox-pecas
  python app.py estoque --perfil almox-pecas
  python app.py alertas --perfil almox-pecas --json
  python app.py central --perfil almox-pecas --ano 2024 --mes 3
"""

from almoxarifado.adapters.cli import main

if __name__ == "__main__":
    main()
