"""GitHub REST and GraphQL access."""
