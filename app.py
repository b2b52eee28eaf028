import os, logging, datetime as dt
from flask import Flask, render_template, request, redirect, url_for, abort, jsonify #flask object, render template renders jinja template/ html pages,
#request redirect form handling and redirects
from flask_sqlalchemy import SQLAlchemy # handles sqlite

from dashboard import DashboardController, RequestStatus
from services.sun import API, DEFAULT_TIMEOUT, SunDataClient

log = logging.getLogger(__name__)

BASE = os.path.dirname(os.path.abspath(__file__))
#creates flask app, template and static folder called
app = Flask(__name__, static_folder="static", template_folder="templates")
app.config["SQLALCHEMY_DATABASE_URI"] = "sqlite:///" + os.path.join(BASE, "instance", "sun_dashboard.db")
#stores sqlite file in instance folder
app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
app.config["SECRET_KEY"] = "dev"
app.config["SUN_API_URL"] = API
app.config["SUN_API_TIMEOUT"] = DEFAULT_TIMEOUT
app.config["SUN_FETCH_TOMORROW"] = False  # True asks the api for tomorrow instead of repeating today
app.config.from_prefixed_env()  # FLASK_SUN_API_URL=... etc override the defaults above
db = SQLAlchemy(app)
#creates sqlachemy helper in this app.

#cities offered in the select on a fresh database
DEFAULT_LOCATIONS = [
    ("New York", 40.7128, -74.0060),
    ("London", 51.5074, -0.1278),
    ("Tokyo", 35.6762, 139.6503),
    ("Sydney", -33.8688, 151.2093),
    ("Cape Town", -33.9249, 18.4241),
    ("Reykjavik", 64.1466, -21.9426),
    ("Cork", 51.8985, -8.4756),
]


class Location(db.Model): #table for selectable locations
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False, unique=True) #label shown in the select
    slug = db.Column(db.String(200), nullable=False, unique=True) #Url version of the name
    lat = db.Column(db.Float, nullable=False)
    lon = db.Column(db.Float, nullable=False)
    notes = db.Column(db.String(400))

    @property
    def selection(self) -> str:
        #value of the select option, parsed back by Coordinates.parse
        return f"{self.lat},{self.lon}"


def slugify(s: str):
    #lowercase and converts any non alphanumeric to hyphens
    s = "".join(ch.lower() if ch.isalnum() else "-" for ch in s).strip("-")
    #collapses duplicate hyphens and reduces length to 200 characters
    return "-".join(filter(None, s.split("-")))[:200]


def init_db():
    """Creates the tables and seeds the default cities when there are no locations yet."""
    if app.config["SQLALCHEMY_DATABASE_URI"].startswith("sqlite:///"):
        os.makedirs(os.path.join(BASE, "instance"), exist_ok=True)
    db.create_all()
    if Location.query.first() is None:
        for name, lat, lon in DEFAULT_LOCATIONS:
            db.session.add(Location(name=name, slug=slugify(name), lat=lat, lon=lon))
        db.session.commit()


@app.cli.command("init-db")
def init_db_command():
    init_db()
    print("Database ready.")


def build_controller() -> DashboardController:
    #a fresh controller and state per request, nothing shared between users
    client = SunDataClient(base_url=app.config["SUN_API_URL"], timeout=float(app.config["SUN_API_TIMEOUT"]))
    tomorrow_fetch = None
    if app.config["SUN_FETCH_TOMORROW"]:
        def tomorrow_fetch(coords):
            return client.fetch(coords.lat, coords.lng, date=dt.date.today() + dt.timedelta(days=1))
    return DashboardController(client, tomorrow_fetch=tomorrow_fetch)


def location_name_for(selection, locations):
    #label of the option that produced this selection value, if it is one of ours
    for loc in locations:
        if loc.selection == (selection or "").strip():
            return loc.name
    return None


@app.route("/", methods=["GET", "POST"])
def home():
    #GET shows the empty dashboard, POST (button click or enter key) loads a location
    locations = Location.query.order_by(Location.name).all()
    controller = build_controller()
    selection = None
    if request.method == "POST":
        selection = request.form.get("location", "")
        controller.submit(selection, location_name_for(selection, locations))
    return render_template("home.html", locations=locations, selection=selection, state=controller.state)


@app.route("/l/<slug>")
def location_detail(slug):
    #direct link to one location's times
    loc = Location.query.filter_by(slug=slug).first_or_404()#loads the location or 404 if none
    locations = Location.query.order_by(Location.name).all()
    controller = build_controller()
    controller.submit(loc.selection, loc.name)
    return render_template("home.html", locations=locations, selection=loc.selection, state=controller.state)


@app.route("/api/sun")
def api_sun():
    #json version of the dashboard for scripts, ?location=lat,lng&name=label
    selection = request.args.get("location", "")
    name = request.args.get("name") or location_name_for(selection, Location.query.all())
    controller = build_controller()
    state = controller.submit(selection, name)
    code = 200 if state.status is RequestStatus.SUCCESS else 400
    return jsonify(state.to_dict()), code


@app.route("/add", methods=["GET", "POST"])
#Adds a new location to the select using get and post method
def add_location():
    if request.method == "POST":
        name = request.form.get("name", "").strip() #name of location
        try:
            lat = float(request.form.get("lat", "")) #latitude coordinate
            lon = float(request.form.get("lon", "")) #longitude coordinate
        except ValueError:
            abort(400)
        notes = request.form.get("notes", "").strip()
        if not name or not (-90 <= lat <= 90 and -180 <= lon <= 180):
            abort(400) #validates the input, if not valid aborts returning error to user
        slug = slugify(name) or "location"
        if db.session.query(Location.id).filter((Location.slug == slug) | (Location.name == name)).first():
            abort(409)
        loc = Location(name=name, lat=lat, lon=lon, notes=notes, slug=slug)
        db.session.add(loc); db.session.commit()
        log.info("added location %s (%s)", name, loc.selection)
        #sends the user straight to the new location's times
        return redirect(url_for("location_detail", slug=slug))
    #Get renders the form
    return render_template("add_location.html")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    with app.app_context():#create tables if none exist
        init_db()
    app.run(debug=True)#runs the dev server on device
