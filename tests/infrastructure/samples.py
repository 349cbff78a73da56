"""
Общий пример корпуса и точки входа для тестов.
"""

import textwrap

# Корпус из двух пакетов:
#   toolkit.helpers.Helper → toolkit.inner.Inner (два перехода от точки входа)
#   toolkit.dead и netutil точке входа не нужны
SAMPLE_CORPUS = {
    "toolkit/__init__.py": "",
    "toolkit/helpers.py": """
        from toolkit.inner import Inner


        class Helper:
            def run(self):
                return Inner().value()
        """,
    "toolkit/inner.py": """
        import json


        class Inner:
            def value(self):
                return json.dumps({"answer": 42})
        """,
    "toolkit/dead.py": """
        class Dead:
            pass
        """,
    "netutil/__init__.py": """
        def ping():
            return "pong"
        """,
}

SAMPLE_ENTRY = textwrap.dedent("""
    import json
    from toolkit.helpers import Helper
    from netutil import ping


    def main():
        return Helper().run()
    """).lstrip("\n")

