# dfa_designer/ui/__init__.py
