"""
Couche adaptateurs.

Les adaptateurs implémentent les ports définis dans core/ports/ et fournissent
des implémentations concrètes pour les systèmes externes.

Sous-packages :
- api/ : Clients API externes (TMDB)

Chaque adaptateur dépend de core/ mais core/ ne dépend jamais des adaptateurs.
"""
