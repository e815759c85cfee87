import pytest
from neo4j import Driver, exceptions
from rich.console import Console

from py_neo_miipa.graph_store import GraphStore

console = Console()

NEO4J_IMAGE = "neo4j:5.18"


def _docker_available() -> bool:
    try:
        import docker
        docker.from_env().ping()
        return True
    except Exception:
        return False


@pytest.fixture(scope="session")
def neo4j_container():
    """
    A pytest fixture that starts and stops a Neo4j container for the test session.
    Tests that depend on it are skipped when no Docker daemon is reachable.
    """
    if not _docker_available():
        pytest.skip("Docker is not available; skipping Neo4j integration tests.")
    from testcontainers.neo4j import Neo4jContainer

    container = Neo4jContainer(image=NEO4J_IMAGE, password="password")
    with container as c:
        driver = c.get_driver()
        driver.verify_connectivity()
        console.log(f"[green]Neo4j container ready at {c.get_connection_url()}[/green]")
        c.driver = driver
        yield c
        c.driver.close()


@pytest.fixture
def neo4j_driver(neo4j_container) -> Driver:
    """
    Provides a driver to the test Neo4j container and cleans the database
    before and after each test function.
    """
    driver = neo4j_container.driver
    _reset(driver)
    yield driver
    _reset(driver)


def _reset(driver: Driver):
    with driver.session() as session:
        session.run("MATCH (n) DETACH DELETE n")
        constraints = session.run("SHOW CONSTRAINTS YIELD name").data()
        for constraint in constraints:
            try:
                session.run(f"DROP CONSTRAINT {constraint['name']}")
            except exceptions.ClientError:
                pass  # already dropped


@pytest.fixture
def store(neo4j_driver: Driver) -> GraphStore:
    """A GraphStore over the test container. The driver is owned by the session fixture."""
    return GraphStore(neo4j_driver, database="neo4j")


@pytest.fixture
def count_nodes(neo4j_driver: Driver):
    """Returns a helper that counts the nodes carrying a label."""
    def _count(label: str) -> int:
        records, _, _ = neo4j_driver.execute_query(f"MATCH (n:{label}) RETURN count(n) AS c")
        return records[0]["c"]
    return _count
