# Services package.
#
# Each module exposes async functions holding the business logic for one
# part of the event domain:
#
#   event_service        event creation, participant/logistics association, reads
#   participant_service  participant creation and reads
#   cost_service         cost recomputation from reserved logistics
#
# All service functions take an AsyncSession as their first argument and
# reach the database through ``app.repository``; the router layer owns the
# transaction boundary via the ``get_db`` dependency.
