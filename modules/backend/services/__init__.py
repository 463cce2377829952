# Business logic layer: access policy, query criteria, note and user lifecycle
