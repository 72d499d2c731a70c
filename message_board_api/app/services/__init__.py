"""
Service layer.

``MessageStore`` owns the durable message records and
``MessageService`` orchestrates authorization, validation and storage
for every board operation.  API handlers only talk to the service.
"""
