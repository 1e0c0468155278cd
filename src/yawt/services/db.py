# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
# Purpose: Wires one collection per entity onto an explicitly constructed store.

from yawt.core.config import DEFAULT_NAMESPACE
from yawt.store import KvStore
from yawt.story import keys
from yawt.story.collections import OrderedCollection, RecordCollection
from yawt.story.models import Book, Character, Event, Location, Scene, Series, Timeline


class StoryDb:
    def __init__(self, store: KvStore, namespace: str = DEFAULT_NAMESPACE):
        self.store = store
        self.namespace = namespace
        self.series = RecordCollection(store, keys.SERIES, Series, "Series", namespace)
        self.books = OrderedCollection(store, keys.BOOK, Book, "Book", namespace)
        self.scenes = OrderedCollection(store, keys.SCENE, Scene, "Scene", namespace)
        self.characters = RecordCollection(store, keys.CHARACTER, Character, "Character", namespace)
        self.locations = RecordCollection(store, keys.LOCATION, Location, "Location", namespace)
        self.timelines = RecordCollection(store, keys.TIMELINE, Timeline, "Timeline", namespace)
        self.events = RecordCollection(store, keys.EVENT, Event, "Event", namespace)
