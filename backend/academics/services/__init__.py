"""Domain services for the records app.

``year_labels`` and ``classification`` are pure functions over plain
records (dicts or model instances); ``folders`` owns the durable year
folder state; ``reports`` renders exports.
"""
