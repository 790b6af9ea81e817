from flask import current_app, g


def current_term():
    """Active term for this request, read from config once per request context."""
    if "current_term" not in g:
        g.current_term = current_app.config["CURRENT_TERM"]
    return g.current_term


def term_order():
    return list(current_app.config.get("TERM_ORDER") or [])
