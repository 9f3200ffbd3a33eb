"""
Business Logic Layer Module.

The logic layer sits between the route modules and the repositories:

- Pagination engine shared by every list endpoint
- Sales aggregator: DTO shaping and the header + lines write path
- Statistics: global totals and monthly quantities, summed client-side
"""
