"""
Service layer. Each service is constructed with the app's `StoreClient` and
composes DAOs inside `@transactional` methods:

- feedback_conversations: feedback inbox, detail, resolved toggle, export data
- curation: golden knowledge CRUD, sync to the search store, search,
  negative feedback feed
- team: authorization records and bootstrap admin
- stats: dashboard counters and question timeline
- collection_crud: allow-listed generic CRUD
- errors: domain exceptions translated to HTTP by the routers
"""
