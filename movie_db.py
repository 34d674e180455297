"""Sample movie database used by the workbench app and the tests."""

from __future__ import annotations

from typing import Dict, Optional

from rel_engine import NameGenerator, Relation


def movie_database(index: Optional[str] = None) -> Dict[str, Relation]:
    """Build the six movie relations, all sharing one name generator."""
    namer = NameGenerator()

    def table(name, attributes, domains, key):
        return Relation.create(name, attributes, domains, key, index=index, namer=namer)

    movie = table("movie", "title year length genre studioName producerNo",
                  "String Integer Integer String String Integer", "title year")
    cinema = table("cinema", "title year length genre studioName producerNo",
                   "String Integer Integer String String Integer", "title year")
    movie_star = table("movieStar", "name address gender birthdate",
                       "String String Character String", "name")
    stars_in = table("starsIn", "movieTitle movieYear starName",
                     "String Integer String", "movieTitle movieYear starName")
    movie_exec = table("movieExec", "certNo name address fee",
                       "Integer String String Double", "certNo")
    studio = table("studio", "name address presNo", "String String Integer", "name")

    for row in [("Star_Wars", 1977, 124, "sciFi", "Fox", 12345),
                ("Star_Wars_2", 1980, 124, "sciFi", "Fox", 12345),
                ("Rocky", 1985, 200, "action", "Universal", 12125),
                ("Rambo", 1978, 100, "action", "Universal", 32355)]:
        movie.insert(row)

    for row in [("Galaxy_Quest", 1999, 104, "comedy", "DreamWorks", 67890),
                ("Rocky", 1985, 200, "action", "Universal", 12125)]:
        cinema.insert(row)

    for row in [("Carrie_Fisher", "Hollywood", "F", "9/9/99"),
                ("Mark_Hamill", "Brentwood", "M", "8/8/88"),
                ("Harrison_Ford", "Beverly_Hills", "M", "7/7/77")]:
        movie_star.insert(row)

    for row in [("Star_Wars", 1977, "Carrie_Fisher"),
                ("Star_Wars", 1977, "Mark_Hamill"),
                ("Star_Wars_2", 1980, "Harrison_Ford")]:
        stars_in.insert(row)

    movie_exec.insert(9999, "S_Spielberg", "Hollywood", 10000.0)

    for row in [("Fox", "Los_Angeles", 7777),
                ("Universal", "Universal_City", 8888),
                ("DreamWorks", "Universal_City", 9999)]:
        studio.insert(row)

    return {r.name: r for r in (movie, cinema, movie_star, stars_in, movie_exec, studio)}
