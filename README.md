# lica

Shopping lists kept per user. A list holds items; each item is a product
with an amount, a unit and a category. Products and categories either
belong to one user or, when they have no owner, are shared by everybody.
The data lives in a SQL database accessed through SQLAlchemy, users sign in
with Google over OAuth2, and the HTML fragments are rendered from Jinja2
templates for an HTMX front end.

## Installing

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

The database URL built from the environment uses the `postgresql://`
scheme, so a PostgreSQL driver for SQLAlchemy has to be installed next to
the package; none is declared as a dependency. `create_db_engine` also
accepts any ready SQLAlchemy URL, such as `sqlite:///lica.db`.

## Configuration

Settings are read from the environment. `lica.settings.load_env` loads a
`.env` file (by default from the working directory) without overriding
variables that are already set, and logs an error when the file is missing.

| Variable               | Meaning                                                        |
|------------------------|----------------------------------------------------------------|
| `DB_USER`              | database user                                                  |
| `DB_PASSWORD`          | database password                                              |
| `DB_DATABASE`          | database name                                                  |
| `DB_HOST`, `DB_PORT`   | database address                                               |
| `LICA_LOG_LEVEL`       | log level as an integer (-4 debug, 0 info, 4 warn, 8 error); debug when unset |
| `LICA_HOST`            | public base address, default `http://localhost:3000`           |
| `LICA_STATE_CHECK`     | fixed OAuth state value; 20 random bytes in hex when unset     |
| `GOOGLE_CLIENT_ID`     | OAuth client id                                                |
| `GOOGLE_CLIENT_SECRET` | OAuth client secret                                            |

An example `.env`:

```
DB_USER=user
DB_PASSWORD=password
DB_DATABASE=lica
DB_HOST=localhost
DB_PORT=5432
GOOGLE_CLIENT_ID=lica-client
GOOGLE_CLIENT_SECRET=secret
```

## Managing the database schema

The `lica` command loads `.env`, sets the log level, connects with the
`DB_*` settings and runs schema migrations:

```
lica migrate init            # create the migration bookkeeping tables
lica migrate up              # apply every pending migration as one group
lica migrate down            # roll back the most recently applied group
lica migrate create add tags # write empty add_tags up/down SQL files
```

`init` must be run once before `up` or `down`. `up` and `down` hold a lock
while they run, and log when there is nothing to do. The built-in
migrations create the users, products, categories, product_categories,
lists and list_items tables. Extra migrations are read from
`<timestamp>_<name>.up.sql` / `.down.sql` files in the directory given by
`--migrations-dir` (default `migrations`); `create` writes new files there.
The command exits with status 1 when a step fails.

The same operations are available as `lica.migrations.Migrator`
(`init`, `lock`, `unlock`, `migrate`, `rollback`, `create_migration`).
For a scratch database, `lica.schema.create_tables(engine)` creates the
tables directly from the SQLAlchemy models.

## Using the library

Services take the signed-in `User` explicitly and raise exceptions derived
from `lica.errors.LicaError`: validation problems raise
`lica.errors.ValidationError`, missing rows raise `lica.errors.NotFoundError`
subclasses.

```python
from lica.database import create_db_engine
from lica.schema import create_tables
from lica.services import CategoryService, ListService, ProductService, UserService
from lica.user_repository import SqlUserRepository
from lica.list_repository import SqlListRepository
from lica.category_repository import SqlCategoryRepository
from lica.product_repository import SqlProductRepository
from lica.list_item_repository import SqlListItemRepository
from lica.list_items import ListItemCreate, ListItemService

engine = create_db_engine("sqlite:///lica.db")
create_tables(engine)

users = UserService(SqlUserRepository(engine))
lists = ListService(SqlListRepository(engine))
categories = CategoryService(SqlCategoryRepository(engine))
products = ProductService(SqlProductRepository(engine))
items = ListItemService(SqlListItemRepository(engine), products, categories, lists)

user = users.create("shopper@example.com")
lists.create(user, "weekly")
categories.create(user, "dairy")
items.add(user, ListItemCreate(list_name="weekly", product_name="milk",
                               category_name="dairy", amount=2))

print([item.product.name for item in lists.get(user, "weekly").items])
```

`ListItemService.add` looks up the list and category, creates the product
when it is not known yet, and stores the item with the unit `stk`.
`UserService.get` and `ProductService.get` return an empty object (its id is
`lica.domain.NIL_UUID`) instead of raising when nothing matches.

Domain values are built with the validating constructors in `lica.domain`
(`new_email`, `new_list_name`, `new_category_name`, `new_product_name`,
`new_amount`, `new_unit`): an e-mail without `@`, an empty name or a
negative amount is rejected.

## Web building blocks

- `lica.auth`: `new_oauth2_config`, `auth_login`, `auth_callback` (checks the
  state, exchanges the code, finds or creates the user and sets the `token`,
  `token_expiry` and `token_refresh` cookies) and `auth_logout`.
- `lica.pages`: `IndexPage`, `ListPage`, `ListAction`, `ListItemAction`,
  `ListComponent` and `ListItemComponent`; apart from the index page they
  answer 404 unless the request carries an `HX-Request` header.
- `lica.responses`: `handle_error`, `run_handler` and the JSON `UserHandler`.
- `lica.views`: `Templates` renders `<name>.html` files from a directory;
  `static_app` serves a directory of assets as a WSGI app.

All handlers take a werkzeug `Request` (and the signed-in `User`) and return
a werkzeug `Response`.

## What the package does not do

- There is no web server and no URL routing: nothing binds the handlers to
  paths or listens on a port. You mount them in your own WSGI application.
- There is no middleware that reads the auth cookies and resolves the
  signed-in user; callers pass the `User` to each handler themselves.
- The HTML templates (`index`, `lists`, `list`, `list-new`,
  `list-item-new`) and static assets are not included; `Templates` and
  `static_app` must be pointed at directories that hold them.
- `SqlUserRepository.update_email` is the only way to change a user's
  e-mail; there is no command or page for it.