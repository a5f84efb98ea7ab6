"""Pure domain logic: chunking, lifecycle rules, backoff, scoring."""
