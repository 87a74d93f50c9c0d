"""Items, configuration and the annotated listing model."""
