CSS_LOG = """
.content { font-family: sans-serif; margin: 1em 2em; }
.section { border-top: 2px solid #444; margin-top: 1.5em; }
.subsection h4 { color: #555; margin-bottom: 0.3em; }
.info { margin: 0.2em 0; }
.warning { color: #a66400; }
.error { color: #b00020; font-weight: bold; }
.debug { color: #777; font-size: 0.9em; }
.result { background: #f3f6fa; padding: 0.3em 0.6em; margin: 0.3em 0; }
.table-container { overflow-x: auto; margin: 1em 0; }
table { border-collapse: collapse; white-space: nowrap; }
th, td { border: 1px solid #ccc; padding: 4px 12px; text-align: left; }
"""
