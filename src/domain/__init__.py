"""Domain layer: resource models, parameters and the services that own them."""
